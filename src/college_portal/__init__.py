"""College Portal package.

Organized by feature modules (students, subjects, attendance, marks, fees, ...)
with a thin Flask controller layer over service/repository layers.
"""

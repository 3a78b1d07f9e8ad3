"""Intern attendance & performance package.

Organized by feature modules (qrcodes, attendance, workdays, performance, ...)
with a thin Flask controller layer over service/repository layers.
"""

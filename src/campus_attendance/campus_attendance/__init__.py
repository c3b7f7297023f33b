"""Campus attendance package.

Organized by feature modules (identity, periods, students, marking, reports)
with a thin Flask controller layer over service/repository layers.
"""

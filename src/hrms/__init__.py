"""HRMS package.

Feature modules (employees, attendance, leave, payroll, receipts, reviews, ...)
sit on top of a single observable data context, with a thin Flask controller
layer and service/repository layers underneath.
"""

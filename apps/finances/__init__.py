"""Finances app package.

Payment records of orders (``BillAction``), the log of every call made to
the payment gateway and the gateway capability itself. The order engine
drives these records through ``apps.orders.services.payments``.
"""

"""Application configuration app.

Keeps admin-editable business settings (booking windows, refund
penalty, order expiry) in the database and exposes them through a
process-wide cached ``ConfigStore``.
"""

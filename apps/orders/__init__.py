"""Orders app package.

Order lifecycle and booking-window engine: admission of new bookings,
pricing, the order status machine, payment hold/capture/refund
coordination, complaints and ticket redemption. Every order-mutating
operation runs in a single database transaction together with its
payment gateway call, so a gateway failure leaves no partial state.
"""

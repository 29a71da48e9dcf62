"""Pure order domain logic: status machine, time policy, pricing, events."""

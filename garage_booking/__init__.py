"""
Garage Booking: vehicle service bookings with pricing, history and email
confirmations.
"""
__version__ = "1.0.0"

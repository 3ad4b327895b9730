"""
Subscribers package - registration and payment state of notification subscribers.

One subscriber per email address. Payment state is a single payment date:
set means the subscriber has an active (paid) subscription.
"""

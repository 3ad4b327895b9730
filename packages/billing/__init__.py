"""Billing: Stripe webhook verification and payment reconciliation."""

"""
Billing package - pricing-model lookups, usage totals and usage events.

This package integrates with:
- Flowglad: Hosted billing (catalog, subscriptions, usage metering, checkout)

A local in-memory provider stands in for Flowglad in development and tests.
"""

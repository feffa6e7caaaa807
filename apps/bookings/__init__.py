"""Bookings app package.

Calendar booking engine for a pool of shared cars: shareholders claim date
ranges, the engine guarantees that accepted bookings of one car never
overlap, and every shareholder gets a month calendar of each car showing
their own, others' and blocked days. Writes are serialized per car with an
in-process lock plus a row lock inside the database transaction.
"""

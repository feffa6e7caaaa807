"""
Shared Kernel

Base domain classes, value objects and application plumbing (unit of
work, message bus) that the booking engine is built on.
"""

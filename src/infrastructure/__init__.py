"""Infrastructure Layer.

File I/O and process-level concerns. Adapters here implement the domain
ports and return domain Value Objects.
"""

"""Concurrency helpers for image loading."""

from recipebox.concurrency.singleflight import SingleFlight

__all__ = ["SingleFlight"]

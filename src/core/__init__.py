"""Core domain package for potawatch.

Core contains filtering, novelty tracking, speech text rendering, and the
dispatch coordinator without any HTTP, audio, or desktop-specific code, keeping
the business logic portable.
"""

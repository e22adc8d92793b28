"""Structured logging with context fields, environment-driven configuration and stdlib bridges."""
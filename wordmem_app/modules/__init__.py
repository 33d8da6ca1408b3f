"""Feature modules; each package exposes one blueprint."""

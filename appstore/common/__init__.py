"""Small helpers shared across app store modules."""

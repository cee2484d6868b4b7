"""Interface adapters exposing the service."""

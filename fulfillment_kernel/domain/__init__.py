"""Pure domain layer: DTOs, store ports, validation."""

"""Engine core: data types, deterministic primitives, and the event bus."""

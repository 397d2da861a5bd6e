"""gdcargo -- scaffold, build and export Godot games backed by a Rust library."""

__version__ = "0.1.0"

"""Command line for inspecting and rewriting Standard MIDI Files."""

"""Command line tools for inspecting payloads and record layouts."""

"""Agent loop: parsing, transcript, tool dispatch and answer extraction."""

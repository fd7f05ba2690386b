"""Command line tool for helm2bundle."""

"""CLI application: argparse registry, shared arguments and output."""

"""Command line interface for viewcache."""

#!/usr/bin/env python3
"""Droplet deployment tool: CLI entrypoint."""

from dropship.dropship import main

if __name__ == "__main__":
    main()

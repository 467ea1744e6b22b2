#!/usr/bin/env python3
"""
NameCom Manager - Main Entry Point

This is the main entry point for the NameCom Manager.
It can be run directly or imported as a module.
"""

from namecom_manager.cli.main import main

if __name__ == "__main__":
    main()

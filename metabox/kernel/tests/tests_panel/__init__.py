"""
Metabox Panel Test Suite

Test Files:
1. test_panel_save.py - Save pass against in-memory storage, both modes
2. test_panel_display.py - Display pass reads storage and renders rows
3. test_panel_hooks.py - Lifecycle registration and eligibility short circuit
"""

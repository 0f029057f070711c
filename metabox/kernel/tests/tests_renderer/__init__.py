"""
Metabox Renderer Test Suite

Test Files:
1. test_renderer_controls.py - Text, textarea, checkbox controls and attributes
2. test_renderer_select.py - Option selection, numeric keys, multiple selects
3. test_renderer_panel.py - Panel table, labels, hidden token input
"""

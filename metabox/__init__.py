"""
Metabox — declarative admin-screen panels for content edit screens.

Register typed fields once, render them as HTML from stored metadata, and
persist submitted form values back through a storage service on save.
"""

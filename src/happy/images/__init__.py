"""
Image uploads and their storage backends.

Keep import side-effect free.
"""

"""
Benchmark suite for urlform decoding performance.

Compares urlform against other form-urlencoded parsers:
- Python standard library urllib.parse.parse_qsl
- python-multipart's QuerystringParser

Measures decoding speed and memory usage across different payload shapes.
"""

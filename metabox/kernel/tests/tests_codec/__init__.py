"""
Metabox Codec Test Suite

Test Files:
1. test_codec_flat.py - Persist/delete decisions for one-record-per-field storage
2. test_codec_serialize.py - Composite record removal and re-addition
3. test_codec_values.py - Numeric detection, string forms, submitted values
"""

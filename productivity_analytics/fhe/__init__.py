"""FHE library wrappers (TenSEAL backend, handle library, decryption oracle)"""

"""Per-resource waiter presets.

Each provider package maps a cloud resource onto the generic waiter:
its state tokens, a probe over a caller-supplied client, and an
extractor for the diagnostic its failure payloads carry.
"""

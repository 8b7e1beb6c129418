"""Engine limits shared between the validator, the pattern engine and the sanitizer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Length ceilings and time budgets enforced by the validator."""

    max_input_length: int = 10000
    max_valid_length: int = 1000
    max_attack_scan_length: int = 5000
    max_suspicious_scan_length: int = 2000
    global_scan_budget_ms: int = 30
    per_pattern_budget_ms: int = 5
    max_encoded_probe_length: int = 200
    max_decoded_probe_length: int = 400
    max_sanitize_length: int = 5000


DEFAULT_CONFIG = EngineConfig()

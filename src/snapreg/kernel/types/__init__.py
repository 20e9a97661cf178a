"""Kernel value types: public re-export surface.

Modules:
  smri.py: Smri, SMRI_MAX, validate_smri, SmriAllocator
"""

from snapreg.kernel.types.smri import SMRI_MAX, Smri, SmriAllocator, validate_smri

__all__ = ["SMRI_MAX", "Smri", "SmriAllocator", "validate_smri"]

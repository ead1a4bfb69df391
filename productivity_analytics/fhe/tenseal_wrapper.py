"""
TenSEAL Wrapper for the productivity contract
Exact integer (BFV) encryption, homomorphic addition and decryption
"""

import base64
import logging
from typing import Any, Dict, Optional

import tenseal as ts

from ..config import FHE_PARAMS

logger = logging.getLogger(__name__)


class TenSEALWrapper:
    """Wrapper for TenSEAL BFV operations"""

    def __init__(self, context=None):
        self.context = context
        self.scheme = 'BFV'
        self.params = {}

    def generate_context(self, poly_modulus_degree=None, plain_modulus=None):
        """Generate a BFV context holding both public and secret keys"""
        poly_modulus_degree = poly_modulus_degree or FHE_PARAMS['poly_modulus_degree']
        plain_modulus = plain_modulus or FHE_PARAMS['plain_modulus']

        self.params = {
            'poly_modulus_degree': poly_modulus_degree,
            'plain_modulus': plain_modulus
        }

        self.context = ts.context(
            ts.SCHEME_TYPE.BFV,
            poly_modulus_degree=poly_modulus_degree,
            plain_modulus=plain_modulus
        )
        logger.info(f"🔑 BFV context generated (N={poly_modulus_degree}, t={plain_modulus})")
        return self.context

    @classmethod
    def from_public_context(cls, data: bytes) -> 'TenSEALWrapper':
        """Build an encrypt-only wrapper from a serialized public context"""
        return cls(context=ts.context_from(data))

    def _require_context(self):
        if not self.context:
            raise ValueError("Context not initialized")

    def has_secret_key(self) -> bool:
        return self.context is not None and not self.context.is_public()

    def public_context(self) -> bytes:
        """Serialize the context without the secret key"""
        self._require_context()
        return self.context.serialize(save_public_key=True, save_secret_key=False,
                                      save_galois_keys=False, save_relin_keys=False)

    def get_keys_info(self) -> Optional[Dict[str, Any]]:
        """Get information about the active context"""
        if not self.context:
            return None

        public_key = base64.b64encode(self.public_context()).decode('utf-8')
        return {
            'public_key': public_key[:100] + '...' if len(public_key) > 100 else public_key,
            'has_secret_key': self.has_secret_key(),
            'scheme': self.scheme,
            'params': self.params
        }

    def encrypt_value(self, value: int) -> bytes:
        """Encrypt a single integer into a serialized BFV vector"""
        self._require_context()
        return ts.bfv_vector(self.context, [int(value)]).serialize()

    def load_vector(self, ciphertext: bytes):
        """Deserialize a BFV vector under this context, ValueError if it does not parse"""
        self._require_context()
        try:
            return ts.bfv_vector_from(self.context, ciphertext)
        except Exception as e:
            raise ValueError(f"Invalid BFV ciphertext: {e}")

    def add(self, left: bytes, right: bytes) -> bytes:
        """Homomorphic addition of two serialized ciphertexts"""
        result = self.load_vector(left) + self.load_vector(right)
        return result.serialize()

    def decrypt_value(self, ciphertext: bytes) -> int:
        """Decrypt a serialized BFV vector holding one integer"""
        if not self.has_secret_key():
            raise ValueError("Secret key not available for decryption")
        vector = self.load_vector(ciphertext)
        return int(vector.decrypt()[0])

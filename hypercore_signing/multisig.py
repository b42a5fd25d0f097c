"""Multi-signature aggregation.

A Hyperliquid multisig user is an account whose actions must carry signatures
of its authorised users. One of them, the lead, submits the action.

The protocol:

1. Every participant signs the inner action. Transfers are signed as their
   multisig typed data variant, all other actions as an agent envelope over
   ``[multisig user, lead, action]``

2. The signatures are wrapped into a :py:class:`~hypercore_signing.action.MultiSigAction`

3. The lead signs ``SendMultiSig`` over the hash of the multisig action

Signatures are kept in the order they were added. The exchange verifies the
threshold, this module does not.

Example:

.. code-block:: python

    envelope = (
        MultiSigAggregator(lead, multisig_address, nonce, NetworkConfig.testnet())
        .add_signer(alice)
        .add_signer(bob)
        .add_signature(carol_signature)
        .finalize(UsdSend(destination=destination, amount=Decimal(10), time=nonce))
    )
    payload = envelope.to_payload()
"""

import logging
from dataclasses import dataclass

from eth_typing import HexAddress

from hypercore_signing.action import MULTI_SIG_TYPED_DATA_ACTIONS, Action, MultiSigAction
from hypercore_signing.exceptions import IncompleteMultiSig, MultiSigFinalized
from hypercore_signing.hashing import action_hash
from hypercore_signing.network import NetworkConfig
from hypercore_signing.rmp import action_to_wire, pack
from hypercore_signing.signature import Signature
from hypercore_signing.signer import BaseSigner
from hypercore_signing.signing import SignedAction, sign_action, sign_rmp, sign_typed_data
from hypercore_signing.typed_data import build_typed_data
from hypercore_signing.wire import normalise_address

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class MultiSigEnvelope:
    """Finalized multisig action, signed by the lead."""

    #: Address of the lead signer, lowercase
    lead_signer: HexAddress

    #: The multisig user, lowercase
    multisig_address: HexAddress

    nonce: int

    #: Participant signatures in insertion order
    signatures: tuple[Signature, ...]

    #: The lead-signed multisig action
    signed: SignedAction

    @property
    def action(self) -> MultiSigAction:
        return self.signed.action

    @property
    def lead_signature(self) -> Signature:
        return self.signed.signature

    def to_payload(self) -> dict:
        """Body of the ``POST /exchange`` request."""
        return self.signed.to_payload()


class MultiSigAggregator:
    """Collect participant signatures and finalize a multisig action.

    - Signers and precomputed signatures can be mixed, the order they are
      added is the order of the signatures in the envelope

    - Queued signers sign only when :py:meth:`finalize` is called

    - Single use: after :py:meth:`finalize` the aggregator refuses changes

    Not thread safe.
    """

    def __init__(self, lead: BaseSigner, multisig_address: HexAddress | str, nonce: int, network: NetworkConfig):
        assert isinstance(lead, BaseSigner), f"Lead must be a BaseSigner, got {type(lead)}"
        assert type(nonce) == int, f"Nonce must be int, got {type(nonce)}"
        self.lead = lead
        self.multisig_address = normalise_address(multisig_address)
        self.nonce = nonce
        self.network = network

        self._entries: list[BaseSigner | Signature] = []

        self.finalized = False

    @property
    def entries(self) -> tuple[BaseSigner | Signature, ...]:
        """Queued signers and precomputed signatures, in insertion order."""
        return tuple(self._entries)

    def __repr__(self):
        state = "finalized" if self.finalized else "collecting"
        return f"<MultiSigAggregator {self.multisig_address} lead:{self.lead.address} entries:{len(self.entries)} {state}>"

    def _check_collecting(self):
        if self.finalized:
            raise MultiSigFinalized(f"Multisig for {self.multisig_address} nonce {self.nonce} already finalized")

    def add_signer(self, signer: BaseSigner) -> "MultiSigAggregator":
        """Queue a participant that signs during :py:meth:`finalize`."""
        self._check_collecting()
        assert isinstance(signer, BaseSigner), f"Expected BaseSigner, got {type(signer)}"
        self._entries.append(signer)
        return self

    def add_signature(self, signature: Signature) -> "MultiSigAggregator":
        """Add a signature collected out of band, e.g. from an offline participant."""
        self._check_collecting()
        assert isinstance(signature, Signature), f"Expected Signature, got {type(signature)}"
        self._entries.append(signature)
        return self

    def _participant_signer(self, action: Action):
        """Return a function that signs the inner action as a participant."""
        lead = normalise_address(self.lead.address)

        if isinstance(action, MULTI_SIG_TYPED_DATA_ACTIONS):
            document = build_typed_data(action, self.network, multi_sig=(self.multisig_address, lead))
            return lambda signer: sign_typed_data(signer, document)

        canonical = pack([self.multisig_address, lead, action_to_wire(action, self.network)])
        connection_id = action_hash(canonical, self.nonce)
        return lambda signer: sign_rmp(signer, connection_id, self.network)

    def finalize(
        self,
        action: Action,
        vault_address: HexAddress | None = None,
        expires_after: int | None = None,
    ) -> MultiSigEnvelope:
        """Sign the inner action by all participants and the multisig action by the lead.

        :param action:
            The inner action executed by the multisig user.

        :raise IncompleteMultiSig:
            No signers or signatures were added.

        :raise SigningFailure:
            A participant or the lead failed to sign. Nothing is returned.
        """
        self._check_collecting()

        if not self._entries:
            raise IncompleteMultiSig(f"No signatures for multisig {self.multisig_address}")

        assert not isinstance(action, MultiSigAction), "Multisig actions cannot be nested"

        sign = self._participant_signer(action)
        signatures = []
        for entry in self._entries:
            if isinstance(entry, Signature):
                signatures.append(entry)
            else:
                signatures.append(sign(entry))
                logger.debug("Collected multisig signature %d from %s", len(signatures), entry.address)

        multi_sig_action = MultiSigAction(
            signature_chain_id=self.network.signature_chain_id,
            signatures=tuple(signatures),
            multi_sig_user=self.multisig_address,
            outer_signer=normalise_address(self.lead.address),
            action=action,
        )

        signed = sign_action(
            self.lead,
            multi_sig_action,
            nonce=self.nonce,
            network=self.network,
            vault_address=vault_address,
            expires_after=expires_after,
        )

        self.finalized = True

        logger.info(
            "Finalized multisig %s %s with %d signatures, nonce %d",
            self.multisig_address,
            type(action).__name__,
            len(signatures),
            self.nonce,
        )

        return MultiSigEnvelope(
            lead_signer=multi_sig_action.outer_signer,
            multisig_address=self.multisig_address,
            nonce=self.nonce,
            signatures=multi_sig_action.signatures,
            signed=signed,
        )

"""
Chain agnostic identifiers (`CAIP-2 <https://chainagnostic.org/CAIPs/caip-2>`_
chain ids and `CAIP-10 <https://chainagnostic.org/CAIPs/caip-10>`_ account ids).

:class:`AccountId` is the only lookup key used by :mod:`tokenapi`: the token
cache is keyed by its string form.

Example:
    ::

        from tokenapi.account_ids import AccountId

        dai = AccountId.build("eip155", "1", "0x6b175474e89094c44da98b954eedeac495271d0f")
        str(dai)
        # => eip155:1:0x6B175474E89094C44Da98b954EedeAC495271d0F
"""

from tokenapi.account_ids.account_id import AccountId, ChainId, EVM_NAMESPACE

"""
Tokenapi resolves fungible token metadata by a chain agnostic
`CAIP-10 <https://chainagnostic.org/CAIPs/caip-10>`_ id and
caches it for subsequent queries.

+------------------------------------------+-------------------------------+
| Module                                   | Description                   |
+==========================================+===============================+
| :mod:`tokenapi.account_ids`              | CAIP-2 / CAIP-10 identifiers  |
+------------------------------------------+-------------------------------+
| :mod:`tokenapi.tokens`                   | Token records, cache and      |
|                                          | the :class:`TokensService`    |
+------------------------------------------+-------------------------------+
| :mod:`tokenapi.evm`                      | Reading ERC20 metadata from   |
|                                          | EVM chains                    |
+------------------------------------------+-------------------------------+
| :mod:`tokenapi.errors`                   | Errors raised by the service  |
+------------------------------------------+-------------------------------+

The best way to get started is :class:`tokenapi.tokens.TokensService`.
"""

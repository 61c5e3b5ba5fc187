# ckpoolkit

Building blocks for a mining pool, in plain Python with no dependencies:

- `ckpoolkit.sha2`: an incremental SHA-256 hasher (`Sha256`, with
  `update`, `copy`, `digest` and `hexdigest`) and the one-shot `sha256(data)`.
- `ckpoolkit.lookup3`: the `hashlittle` 32-bit hash for hash tables, with
  `hashsize` and `hashmask`.
- `ckpoolkit.jsonutil`: `json_array_string` and `json_object_dup` for picking
  values out of decoded JSON without raising.
- `ckpoolkit.encoding`: hex (`bin2hex`, `validhex`, `hex2bin`), base64
  (`http_base64`), base58 (`b58tobin`), string comparison (`safecmp`,
  `cmdmatch`), output scripts for an address (`address_to_txn`), coinbase
  height serialisation (`ser_number`, `get_sernumber`), size rounding
  (`align_len`, `round_up_page`), `trail_slash`, and word and byte order
  shuffles (`swap_256`, `bswap_256`, `flip_32`, `flip_80`).
- `ckpoolkit.difficulty`: target and difficulty conversions
  (`le256todouble`, `be256todouble`, `diff_from_target`,
  `diff_from_betarget`, `diff_from_nbits`, `target_from_diff`), the share
  check `fulltest`, double SHA-256 (`gen_hash`), the `ShareError` codes with
  `share_error_text`, and `suffix_string` for readable hash rates.
- `ckpoolkit.net`: TCP helpers that raise `SocketError` on failure: URL
  parsing and resolving (`extract_sockaddr`, `url_from_sockaddr`,
  `url_from_serverurl`, `url_from_socket`), socket options
  (`keep_sockalive`, `nolinger_socket`), `bind_socket`, `connect_socket`,
  `round_trip`, readiness waits (`wait_close`, `wait_read_select`,
  `wait_write_select`) and exact-length I/O (`read_length`, `write_length`,
  `write_socket`, `empty_socket`).

## Installation

```
pip install .
```

## Examples

```python
from ckpoolkit.difficulty import diff_from_target, target_from_diff
from ckpoolkit.encoding import bin2hex

target = target_from_diff(1.0)
print(bin2hex(target))
print(diff_from_target(target))
```

```python
from ckpoolkit.sha2 import sha256

print(sha256(b"abc").hex())
```

```python
from ckpoolkit.net import extract_sockaddr

print(extract_sockaddr("stratum+tcp://[::1]:3333"))  # ('::1', '3333')
```

## What it does not do

The package is a library only. It installs no command, and it has no
local-socket message protocol, no way to tell a running pool of a new
block, no lock classes, no time or sleep helpers and no log-file rotation.

## Tests

```
pip install .[test]
pytest
```
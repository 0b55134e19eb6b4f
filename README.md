# esurfing

Pure-Python session ciphers for a campus-network client, plus a console and
file logger and a shutdown helper. The package has no dependencies beyond the
standard library.

## Installation

    pip install .

## Ciphers

Every cipher is a subclass of `esurfing.cipherutils.Cipher`. Its `encrypt(text)`
method takes a string, encodes it as UTF-8 and returns the ciphertext as
upper-case hex. Its `decrypt(hex_text)` method takes hex in either case and
returns the string. Keys and IVs of the wrong size raise `ValueError`, as do
malformed hex and ciphertext of the wrong length.

| Module          | Class                   | Construction                         | Notes                                                        |
|-----------------|-------------------------|--------------------------------------|--------------------------------------------------------------|
| `esurfing.des`  | `DesedeEcbCipher`       | `(key1, key2)`, 24 bytes each        | two triple-DES ECB layers, `key1` then `key2`                |
| `esurfing.des`  | `DesedeCbcPcCipher`     | `(key1, key2, iv1, iv2)`, 24/24/8/8  | two triple-DES CBC layers, `key2`/`iv2` then `key1`/`iv1`    |
| `esurfing.xtea` | `ModXteaCipher`         | `(key1, key2, key3)`                 | ECB, passes with `key1`, `key2`, `key3`                      |
| `esurfing.xtea` | `ModXteaIvCipher`       | `(key1, key2, key3, iv)`             | CBC, passes with `key3`, `key2`, `key1`                      |
| `esurfing.xtea` | `ModXteaPcCipher`       | `(key1, key2, key3)`                 | as `ModXteaCipher` with byte-swapped key words               |
| `esurfing.xtea` | `XteaCbcTriplePcCipher` | `(key0, key1, key2, iv)`             | CBC, byte-swapped keys, passes with `key2`, `key1`, `key0`   |
| `esurfing.sm4`  | `Sm4EcbCipher`          | `(key)`, 16 bytes                    | SM4 ECB                                                      |
| `esurfing.sm4`  | `Sm4CbcCipher`          | `(key, iv)`, 16 bytes each           | SM4 CBC                                                      |
| `esurfing.zuc`  | `ZucCipher`             | `(key, iv)`, 16 bytes each           | ZUC-128 stream, restarted for every message                  |

XTEA keys are sequences of four unsigned 32-bit integers, and XTEA IVs are
sequences of two.

The SM4 ciphers use PKCS#7 padding. All the others pad with zero bytes to the
block size (4 bytes for ZUC, 8 for DES and XTEA), and strip trailing zero
bytes when they decrypt.

```python
from esurfing.sm4 import Sm4CbcCipher

cipher = Sm4CbcCipher(key=bytes(16), iv=bytes(16))
hex_text = cipher.encrypt("hello")
assert cipher.decrypt(hex_text) == "hello"
```

### Lower-level pieces

- `esurfing.des.des_encrypt_block(block, key)` and `des_decrypt_block(block, key)`
  run single DES on one 8-byte block with an 8-byte key.
- `esurfing.sm4.sm4_key_expansion(key)` returns the 32 round keys, and
  `sm4_encrypt_block(block, round_keys)` and
  `sm4_decrypt_block(block, round_keys)` work on one 16-byte block.
- `esurfing.zuc.ZucKeystream(key, iv)` produces a ZUC-128 keystream.
  `next_word()` returns the next 32-bit word. `process(data)` XORs bytes with
  the stream and continues where the previous call stopped.
- `esurfing.cipherutils` provides `bytes_to_hex_upper`, `hex_to_bytes`,
  `pad_to_multiple`, `pkcs7_pad`, `pkcs7_unpad`, `strip_trailing_zeros` and
  `xor_bytes`.

## Logging

`esurfing.logger.Logger(log_dir=None, debug=False, max_lines=100000)` writes
each record to standard output and appends it to `run.log` in `log_dir`. It
creates the directory if it does not exist. A line looks like this:

    [2024-01-01 12:00:00] [信息] [app.py:42] message

The level is `LogLevel.DEBUG` when `debug` is true and `LogLevel.INFO`
otherwise. Records below that level are dropped. The logger has the methods
`log(level, message)`, `debug`, `info`, `warn`, `error` and `fatal`.

Once `max_lines` lines have been written, `run.log` is renamed to
`YYYYmmdd-HHMMSS.log` and a new `run.log` is started. `close()` renames the
current file in the same way. The logger also works as a context manager.

`default_log_dir(debug, small_device)` returns the directory used when
`log_dir` is `None`:

- On Windows it is `logs` next to the running script.
- Elsewhere it is `/var/log/esurfing/logs`.
- It is `/usr/esurfing/logs` on OpenWrt when `debug` is set and
  `small_device` is not.

## Shutdown

```python
from esurfing.logger import Logger
from esurfing.shutdown import Shutdown

logger = Logger("logs", debug=True)
shutdown = Shutdown(logger)
shutdown.add_cleanup(lambda: logger.info("cleaning up"))
shutdown.install_signal_handlers()
```

- `perform_cleanup()` runs the registered callbacks once, in the order they
  were added, and then closes the logger.
- `shut(exit_code)` logs, cleans up and raises `SystemExit` with that code.
- `install_signal_handlers()` makes SIGINT and SIGTERM call `shut(0)`. If a
  handler cannot be installed, it logs an error and exits with status 1.

## What this package does not do

This package has no command-line program and does no networking:

- It does not log in to, keep alive or log out of a campus network.
- It holds no built-in key tables.
- It has no way to choose a cipher by algorithm identifier.
- It has no AES ciphers.

Callers supply their own keys and build the cipher they need.

## Tests

    pip install .[test]
    pytest
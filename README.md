# mediautil

Small, dependency-free building blocks for media streaming servers and tools.
It is a library only: it has no command and starts no server.

## What is inside

- `mediautil.buffer` – `Buffer`, a growable byte buffer read from the front and
  written at the back with big-endian integer and float helpers (`read_uint16`,
  `write_float64`, `malloc`, `split`, ...); `LimitBuffer`, which raises
  `ValueError` when a write would exceed its capacity; and helpers for lists of
  byte chunks: `concat_buffers`, `size_of_buffers`, `split_buffers`.
- `mediautil.amf` – AMF0 encoding and decoding as used by RTMP: the `AMF`
  buffer (`marshal`, `marshals`, `unmarshal`, `read_number`, ...), `EcmaArray`
  for values to be sent as ECMA arrays, `AMFError`, and `marshal_amfs`.
  Dicts, lists, tuples and dataclass instances are encoded as objects and
  strict arrays.
- `mediautil.amf3` – AMF3 with string and object reference tables: `AMF3` and
  `marshal_amf3s`. Decoding covers null, booleans, integers, doubles, strings
  and dynamic objects.
- `mediautil.bits` – `BitReader`, `BitWriter` and `GolombBitReader`
  (`read_exponential_golomb_code`, `read_se`).
- `mediautil.pio` – fixed-width integers from and to bytes (`u16be`, `i24be`,
  `u32le`, `put_u32be`, `put_u48be`, ...), and `vec_len` / `vec_slice` over
  lists of byte chunks.
- `mediautil.crc32` – table-driven reflected CRC-32 (polynomial `0xEDB88320`,
  no final inversion): `crc32_update`, and the `Crc32Reader` and `Crc32Writer`
  stream wrappers; `Crc32Reader.read_crc32_and_check` consumes a trailing
  4-byte checksum and raises `ValueError` if the residue is not zero.
- `mediautil.reorder` – `RTPReorder`, which holds early RTP packets until the
  ones before them arrive, counting `total` and `drop`.
- `mediautil.dtsestimator` – `DTSEstimator`, a non-decreasing DTS from a
  stream of 32-bit PTS values.
- `mediautil.timestamp` – `TimestampProcessor`, which turns jumping or
  backward timestamps into an increasing series.
- `mediautil.linkedlist` – `LinkedList` and `ListItem`, a doubly linked list
  whose items can be recycled into a pool list.
- `mediautil.ring` – `Ring` and `new_ring`, a circular list.
- `mediautil.ring_writer` – `RingWriter` and `DataFrame`: one writer, many
  readers; the ring grows past frames still being read.
- `mediautil.pool` – `BLL` and `BLLs` (lists of byte fragments), their readers
  `BLLReader` and `BLLsReader` (`read_byte`, `read_be`, `leb128_unmarshal`,
  ...), and `BytesPool`, a power-of-two graded pool of byte blocks.
- `mediautil.promise` – `SafeChan`, a bounded channel that refuses sends once
  closed, and `Promise`, a one-shot outcome with a timeout (10 s by default).
- `mediautil.retry` – `retry` with exponential back-off and jitter; raise
  `RetryStop(error)` from the call to stop at once and re-raise `error`.
- `mediautil.ip` – `is_lan_addr` and `is_lan_ip` for loopback and private
  IPv4 ranges.
- `mediautil.system` – `exists`, `bit1`, `is_subdir`, `current_dir`,
  `wait_term`, `init_fatal_log` (directory taken from `MEDIAUTIL_FATAL_LOG`,
  default `./fatal`) and `create_shutdown_script`.
- `mediautil.dynstruct` – `StructBuilder`, `Struct` and `Instance`: record
  types assembled field by field at run time; `FieldNotFound` for unknown
  fields.

## Examples

Encode and decode an RTMP command with AMF0:

```python
from mediautil.amf import AMF, marshal_amfs

payload = marshal_amfs("connect", 1, {"app": "live"})
amf = AMF(payload)
print(amf.unmarshal(), amf.unmarshal(), amf.unmarshal())
# connect 1.0 {'app': 'live'}
```

Read bit fields:

```python
import io
from mediautil.bits import BitReader

reader = BitReader(io.BytesIO(bytes([0xF3, 0xB3])))
print(reader.read_bits(4), reader.read_bits(4))  # 15 3
```

Reorder RTP packets:

```python
from mediautil.reorder import RTPReorder

reorder = RTPReorder()
reorder.push(0, "a")        # "a"
reorder.push(2, "c")        # None, held back
reorder.push(1, "b")        # "b"
reorder.pop()               # "c"
```

## What it does not do

There are no little-endian integer helpers apart from `pio.u32le` and
`pio.put_u32le`, no helpers that read or write integers straight from streams,
and no packing of MPEG-TS PTS/DTS or PCR fields. Big-endian fixed-width
integers are covered by `mediautil.pio` and `mediautil.buffer.Buffer`.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```
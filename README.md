# srtcore

The timing, buffering and congestion-control pieces of the SRT (Secure
Reliable Transport) protocol, written as plain Python objects that do no I/O.
Each component takes the current time as an argument. You can drive it from
any event loop, and you can test it deterministically.

Instants and durations are integers in **microseconds** on a monotonic clock.
One source for them is `time.monotonic_ns() // 1000`. The one exception is
`gen_cookie`: its optional `now` argument is in seconds since the Unix epoch.

## Modules

- `srtcore.seq_number`
  - `SeqNumber` is a 31-bit sequence number.
    - Addition wraps around.
    - Subtracting two sequence numbers gives the forward distance between them.
    - Comparisons are aware of wrap-around.
    - `SeqNumber.new_truncate(value)` keeps the low 31 bits of `value`.
  - `seq_num_range(begin, past_end)` yields the numbers in the half-open range from `begin` to `past_end`.
- `srtcore.timing`
  - `TimeStamp` is a 32-bit wrapping timestamp.
  - `TimeSpan` is a signed span.
  - `TimeBase` maps instants to timestamps and back:
    - `timestamp_from`
    - `instant_from`
    - `adjust`
    - `origin_time`
  - `Timer` is a periodic timer with these methods:
    - `check_expired`
    - `next_instant`
    - `reset`
    - `set_period`
- `srtcore.signed_time` is a variant of `TimeBase` and `Timer`.
  - Its timestamps are signed 32-bit integers.
  - Its `Timer.set_period` never goes below one microsecond.
- `srtcore.stats`
  - `OnlineWindowedStats(period, stats_factory)` collects measures.
  - Its `add` returns a `StatsWindow` once each period has elapsed, and returns `None` otherwise.
- `srtcore.cookie`
  - `gen_cookie(address, now=None)` hashes a `(host, port)` address together with the time.
  - The result is a signed 32-bit handshake cookie.
- `srtcore.connection`
  - `Connection(socket_start_time)` tracks expiry events and keep-alives.
  - `next_action(now)` returns one of:
    - `ContinueUntil(instant)`
    - `SendKeepAlive()`
    - `Close()`, after 16 expiry events with no packet from the peer.
  - Call `on_packet` when a packet arrives and `on_send` when one is sent.
- `srtcore.receiver_time`
  - `SynchronizedRemoteClock` corrects for steady drift of the remote clock. After the first sample it adjusts only once per 1000 samples, and only when their spread is under 5 ms.
  - `RTT` keeps a smoothed round-trip time and its variance.
  - `ReceiveTimers` holds the ACK and NAK timers. Their periods are derived from the RTT.
- `srtcore.congestion_control`
  - `SenderCongestionControl` derives the inter-packet period (`snd_period`) from the input data rate.
  - The live data rate modes are:
    - `FixedRate`
    - `MaxRate`
    - `AutoRate`
    - `UnlimitedRate`
  - `MessageStats`, `mean_payload_size` and `data_rate` describe a statistics window.
- `srtcore.packets`
  - `DataPacket`
  - `PacketLocation` (`FIRST`, `LAST`, `ONLY`)
  - `DataEncryption`
- `srtcore.receive_buffer`
  - `RecvBuffer(head, start, tsbpd_latency)` reorders packets.
  - It releases whole messages when they are due (TSBPD).
  - It drops packets that are too late.
- `srtcore.send_buffers`
  - `TransmitBuffer` splits messages into packets of at most `max_packet_size` bytes. It can optionally encrypt them through an object with an `encrypt(seq_number, payload)` method.
  - `SendBuffer` keeps sent packets until they are acknowledged. Its `get` raises `PacketNotBuffered` for a number it does not hold.
  - `LossList` queues lost packets for retransmission and marks them as retransmitted.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from srtcore.seq_number import SeqNumber, seq_num_range

start = SeqNumber.new_truncate(2**31 - 2)
print([n.as_raw() for n in seq_num_range(start, start + 4)])
# [2147483646, 2147483647, 0, 1]
```

```python
from srtcore.timing import Timer

timer = Timer(500_000, 0)          # fires every 0.5 s, starting at t=0
print(timer.check_expired(400_000))    # None
print(timer.check_expired(1_200_000))  # 1000000
```

## What this package does not do

This package has only the building blocks. It does not include:

- sockets or any network I/O
- wire encoding or decoding of packets
- the connection handshake (caller, listener, rendezvous)
- the complete sender and receiver state machines
- encryption or key management

The code that sends packets, reads them and schedules the components belongs to whoever uses the package.
# leoreplay

Building blocks for emulating and watching network links. It uses only the
standard library.

- `leoreplay.packet_queue`: `QueuedPacket`, the abstract `PacketQueue`, and
  `InfinitePacketQueue`, which never drops.
- `leoreplay.dropping_queue`: `DropTailPacketQueue` and `DropHeadPacketQueue`,
  bounded by `bytes=` and/or `packets=` limits, plus the argument reader
  `get_arg`.
- `leoreplay.pie_queue`: `PIEPacketQueue`, PIE active queue management,
  configured with `qdelay_ref=` and `max_burst=`.
- `leoreplay.tokens`: `split` for header-style values and `MIMEType` for
  the media type of a Content-Type value.
- `leoreplay.secure_socket`: `SSLContext`, `SecureSocket`, `SSLMode` and
  `SecureSocketError`, thin wrappers over the standard `ssl` module.
- `leoreplay.apache_config`: `apache_main_config` and `apache_ssl_config`,
  which build configuration text for an Apache server.
- `leoreplay.graph` and `leoreplay.binned_livegraph`: `Graph`, an autoscaling
  scrolling chart drawn onto a canvas, and `BinnedLiveGraph`, which collects
  values into fixed-width time bins and plots them.

## Packet queues

A queue is configured with an argument string such as `"bytes=3000"` or
`"packets=100, bytes=150000"`. `get_arg(args, name)` reads one value. A name
that does not appear gives 0. A name that is not followed by `=` and digits
raises `ValueError`. A dropping queue with neither limit raises `ValueError`,
and so does an `InfinitePacketQueue` given any arguments.

```python
from leoreplay.dropping_queue import DropTailPacketQueue
from leoreplay.packet_queue import QueuedPacket

queue = DropTailPacketQueue("packets=2")
for n in range(3):
    queue.enqueue(QueuedPacket(contents=b"x" * 100, arrival_time=n))

print(queue.size_packets(), queue.size_bytes(), str(queue))
# 2 200 droptail [packets=2]
```

`DropHeadPacketQueue` always accepts the arriving packet. It then removes
packets from the head until the limits hold again. `dequeue` on an empty
queue raises `IndexError`.

`PIEPacketQueue` also needs a byte or packet limit. It takes a millisecond
`clock` (a callable returning an int) and an `rng` (any object with a
`random()` method). Passing both makes runs deterministic:

```python
import random
from leoreplay.pie_queue import PIEPacketQueue

now = [0]
queue = PIEPacketQueue(
    "bytes=100000, qdelay_ref=20, max_burst=100",
    clock=lambda: now[0],
    rng=random.Random(1),
)
```

The drop probability is recalculated once for every 30 ms period that has
passed. This happens on each enqueue and each dequeue. The current value is
available as `queue.drop_prob`.

## Header values and media types

```python
from leoreplay.tokens import MIMEType, split

split("gzip, chunked", ",")                    # ['gzip', ' chunked']
MIMEType("text/html; charset=utf-8").type      # 'text/html'
```

An empty media type raises `ValueError`.

## TLS sockets

`SSLContext(SSLMode.CLIENT)` makes sockets that do not verify the peer.
`SSLContext(SSLMode.SERVER, certfile, keyfile)` needs a certificate to
present. No certificate is bundled. `new_secure_socket(sock)` wraps a
connected socket. You then call `connect()` or `accept()` to perform the
handshake.

`read()` and `write()` exchange text in which each character is one byte
(latin-1). An empty string from `read()` means end of stream, after which
`eof()` is true. Failures raise `SecureSocketError`.

## Apache configuration

`apache_main_config(mod_mpm_prefork, mod_authz_core, mod_deepcgi)` and
`apache_ssl_config(mod_ssl, certificate_file, key_file)` return configuration
text. You pass them the paths of the module and certificate files.

## Graphs

`Graph` draws onto any object with `width`, `height`, `fill_rectangle`,
`line`, `text` and `polyline`. `RecordingCanvas` is such an object: it keeps
the operations in `operations`, and `of_kind(kind)` filters them.

```python
from leoreplay.binned_livegraph import BinnedLiveGraph
from leoreplay.graph import RecordingCanvas, Style

now = [10_000]
graph = BinnedLiveGraph(
    "throughput", [Style(0.0, 0.0, 1.0, 1.0)], "Mbit/s",
    multiplier=8 / 1e6, rate_quantity=True, bin_width_ms=500,
    clock=lambda: now[0],
)
graph.add_value_now(0, 1500)
now[0] += 600
canvas = RecordingCanvas()
graph.draw_frame(canvas)
print(len(canvas.of_kind("polyline")))
```

In a `BinnedLiveGraph`, each finished bin becomes one point. When
`rate_quantity` is set, the value is divided by the bin width in seconds.
`initialize_new_bin(bin_width_ms, old_value)` gives the starting value of
the next bin; the default starts each bin at 0. A negative starting value
marks a default: `add_value_now` then raises `ValueError`, and
`set_max_value_now` replaces the value.

`start(canvas_factory)` draws frames on a background thread.
`close()` (or leaving a `with` block) stops the thread and logs any error
it ended with.

## What is not included

The package has no HTTP message parser. It also has no recording proxy and
no store for recorded requests and responses. `tokens` offers only the
splitting and media-type helpers such a parser would use.

The graphs draw onto a canvas you supply. The package opens no window.
Nothing in it runs as a command.
"""
Tools to display hashes to humans.

Seed hashes, header hashes and mix hashes are shown as plain hexlified bytes, in the order they are hashed and
written; no byte reversal anywhere.
"""
from binascii import hexlify, unhexlify


def human(b):
    return hexlify(b).decode('utf-8')


def computer(s):
    if s.startswith('0x'):
        s = s[2:]
    return unhexlify(s.encode('utf-8'))


def human_size(n):
    if n < 1024:
        return "%d B" % n

    for unit in ["KiB", "MiB", "GiB"]:
        n /= 1024
        if n < 1024 or unit == "GiB":
            break

    return "%.1f %s" % (n, unit)

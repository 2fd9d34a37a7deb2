import cProfile
from time import time

from ccmash.hash import keccak_256
from ccmash.light import Light

# Light (verifier) hashes per second at epoch 0:
#
#    python -m pytest performance/profile_light.py -s

HASHES = 20


def steps():
    start = time()
    light = Light.new(0)
    print("Cache built in %.1f seconds" % (time() - start))

    header_hash = keccak_256(b'profile_light')

    start = time()
    for nonce in range(HASHES):
        light.compute(header_hash, nonce)

    print("%.2f light hashes per second" % (HASHES / (time() - start)))


def test_light():

    with cProfile.Profile() as pr:
        pr.runcall(steps)
        pr.print_stats(sort='cumulative')


if __name__ == '__main__':
    steps()

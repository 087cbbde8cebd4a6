#!/usr/bin/env python3
"""
Hash functions for 2-bit packed kmers.

minimap2_hash() is derived from the minimap2 source code (the function hash64
in sketch.c), modified by the incorporation of a seed. If the seed is zero the
hash is identical to minimap2's. For a given seed and a mask of the form
(4**k)-1, minimap2_hash(seed,*,mask) is invertible over 4**k.

broccohash() is derived from David Stafford's Mix13 bit mixer [1] (the
finalizer also used in SplitMix64), modified by the incorporation of a seed.
For a given seed, broccohash(seed,*) is invertible over 2**64.

The identity 'hash' returns the packed kmer itself, so minimisers are the
lexicographically smallest kmers.

References:
  [1] Stafford, David, "Better Bit Mixing - Improving on MurmurHash3's
      64-bit Finalizer"
      http://zimbry.blogspot.com/2011/09/better-bit-mixing-improving-on.html
"""

minimap2_hash_names   = ["minimap2","minimap2hash","minimap2_hash"]
broccohash_names      = ["broccohash","brocco","splitmix64","splitmix64hash","splitmix64_hash"]
identity_names        = ["identity","none","lexicographic","lex"]

mask64 = 0xFFFFFFFFFFFFFFFF


# set_up_hash_function--
#	Create the hasher; the returned function maps kmer bits to a hash value

def set_up_hash_function(hashType,hashSeed,kmerSize):
	if (hashType in minimap2_hash_names):
		hashMask = (4**kmerSize)-1
		return lambda kmerBits : minimap2_hash(hashSeed,kmerBits,hashMask)
	elif (hashType in broccohash_names):
		return lambda kmerBits : broccohash(hashSeed,kmerBits)
	elif (hashType in identity_names):
		return lambda kmerBits : kmerBits
	else:
		assert (False), "only minimap2, broccohash, and identity hashes are currently supported, not \"%s\"" % hashType


# minimap2_hash--
#	seed: a 64-bit seed for the hash function
#	v:    the 64-bit value to hash
#	mask: the bits to hash; usually this is (4**k)-1 where k is the kmer size

def minimap2_hash(seed,v,mask):
	u = (v + seed) & mask
	u = ((~u) + (u << 21)) & mask           # u = (u<<21)-(u+1)
	u ^= u >> 24
	u = ((u + (u << 3)) + (u << 8)) & mask  # u *= 265
	u ^= u >> 14
	u = (u + (seed >> 5)) & mask
	u = ((u + (u << 2)) + (u << 4)) & mask  # u *= 21
	u ^= u >> 28
	u = (u + (u << 31)) & mask              # u *= 2147483649
	return u


# broccohash--
#	seed: a 64-bit seed for the hash function
#	v:    the 64-bit value to hash

def broccohash(seed,v):
	seed ^= 0x3243F6A8885A308D              # (pi in base 16)
	u = (v + seed) & mask64
	u ^= u >> 30
	u = (u * 0xBF58476D1CE4E5B9) & mask64
	u ^= u >> 27
	u = (u + (seed >> 5)) & mask64
	u = (u * 0x94D049BB133111EB) & mask64
	u ^= u >> 31
	return u

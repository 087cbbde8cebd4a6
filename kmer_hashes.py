#!/usr/bin/env python3
"""
Kmer hashing of DNA sequences, feeding the minimiser stream.
"""

from minimiser_view import make_minimiser_stream,minimisers_with_positions


# kmer_hashes--
#	Yield the hash of each kmer in a sequence, one-by-one. With reverse=True,
#	yield the hash of the reverse complement of the kmer at each position
#	instead, so that the forward and reverse hashes line up position by
#	position.

ntToBits = {"A":0 , "C":1, "G":2, "T":3}
hashOfBadKmer = 0xFFFFFFFFFFFFFFFF   # assumes hash range is 64 bits

def kmer_hashes(seq,kmerSize,hashFunc,reverse=False):
	seqLen = len(seq)
	if (reverse):
		revSeq = reverse_complement(seq)

	for ix in range(kmerSize,seqLen+1):
		if (reverse):
			kmer = revSeq[seqLen-ix:seqLen-ix+kmerSize]
		else:
			kmer = seq[ix-kmerSize:ix]

		try:
			kmerBits = 0
			for nt in kmer:
				kmerBits = (kmerBits<<2) + ntToBits[nt]
			yield hashFunc(kmerBits)
		except KeyError:
			# the kmer contains a non-ACGT
			yield hashOfBadKmer


# sequence_minimisers--
#	Yields a sequence of (h,ix) pairs; h is a minimiser hash value, ix is the
#	kmer's position in seq. If the sequence has fewer than windowSize kmers,
#	the whole sequence is one window.

def sequence_minimisers(seq,kmerSize,windowSize,hashFunc,canonical=False):
	forwardHashes = kmer_hashes(seq,kmerSize,hashFunc)
	if (canonical):
		reverseHashes = kmer_hashes(seq,kmerSize,hashFunc,reverse=True)
		view = make_minimiser_stream(forwardHashes,reverseHashes,windowSize)
	else:
		view = make_minimiser_stream(forwardHashes,windowSize)

	for mini in minimisers_with_positions(view): yield mini


# fasta_sequences--

def fasta_sequences(f):
	seqName = None
	for line in f:
		line = line.strip()

		if (line.startswith(">")):
			if (seqName != None):
				yield (seqName,"".join(seq))
			(seqName,seq) = (line[1:].strip(),[])
		elif (seqName == None):
			if (line == ""): continue
			assert (False), "first sequence has no header"
		else:
			seq += [line]

	if (seqName != None):
		yield (seqName,"".join(seq))


# reverse_complement--

complementMap = str.maketrans("ACGTSWRYMKBDHVNacgtswrymkbdhvn",
                              "TGCASWYRKMVHDBNtgcaswyrkmvhdbn")

def reverse_complement(nukes):
	return nukes[::-1].translate(complementMap)

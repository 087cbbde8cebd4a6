#!/usr/bin/env python3
"""
Report the robust-winnowing minimisers of the kmers in DNA sequences.
"""

from sys            import argv,stdin,stderr,exit
from math           import ceil
from gzip           import open as gzip_open
from hash_functions import set_up_hash_function, \
                           minimap2_hash_names, \
                           broccohash_names, \
                           identity_names
from kmer_hashes    import kmer_hashes,sequence_minimisers,fasta_sequences

programName    = "minimisers"
programVersion = "0.1.0"


def usage(s=None):
	message = """
usage: cat <fasta_file> | %s [<fasta_file>] [options]
  <fasta_file>            (optional) file to read sequences from; if this is
                          absent, sequences are read from stdin
  --window=<N>            (W=) minimiser window size (number of kmers in a
                          window)
                          (default is 10)
  --k=<N>                 (K=) kmer size
                          (default is 16)
  --canonical             consider reverse-complemented equivalent kmers to be
                          the same; each position contributes the smaller of
                          its forward and reverse-complement hashes
                          (by default we consider such kmers as different)
  --hash=[<type>.]<seed>  type and seed for hash function; seed is an integer,
                          and "0x" prefix can be used to indicate hexadecimal;
                          type is either minimap2, broccohash, or identity
                          (default is minimap2.0)
  --head=<number>         limit the number of input sequences
  --progress=<number>     periodically report how many sequences we've
                          processed
  --version               report this program's version number

Report the minimisers of each sequence, one per line, as
  <name> <kmer position> <hash value>
Ties for the smallest hash in a window are resolved in favor of the rightmost
kmer (robust winnowing), and a minimiser is not reported again while it stays
the smallest in the sliding window.""" \
% programName

	if (s == None): exit (message)
	else:           exit ("%s\n%s" % (s,message))


def main():
	global debug

	# parse the command line

	fastaName      = None
	windowSize     = 10
	kmerSize       = 16
	canonical      = False
	hashType       = "minimap2"
	hashSeed       = 0
	headLimit      = None
	reportProgress = None
	debug          = []

	for arg in argv[1:]:
		if ("=" in arg):
			argVal = arg.split("=",1)[1]

		if (arg in ["--help","--h","-help","-h"]):
			usage()
		elif (arg in ["--version","--v","--V","-version","-v","-V"]):
			exit("%s, version %s" % (programName,programVersion))
		elif (arg.startswith("--window=")) or (arg.startswith("W=")) or (arg.startswith("w=")):
			windowSize = int_with_unit(argVal)
			if (windowSize < 2):
				usage("window size has to be at least 2")
		elif (arg.startswith("--kmer=")) or (arg.startswith("--k=")) \
		  or (arg.startswith("K=")) or (arg.startswith("k=")):
			kmerSize = int(argVal)
			if (kmerSize < 2):
				usage("kmer size has to be at least 2")
			if (kmerSize > 32):
				usage("kmer size can't be more than 32 (because of hash function implementations)")
		elif (arg in ["--canonical","--canonicalize","--canon"]):
			canonical = True
		elif (arg in ["--noncanonical","--nocanonicalize","--noncanon","--nocanon"]):
			canonical = False
		elif (arg.startswith("--hash=")) or (arg.startswith("--hasher=")):
			if (argVal in minimap2_hash_names):
				hashType = "minimap2"
				hashSeed = 0
			elif (argVal in broccohash_names):
				hashType = "broccohash"
				hashSeed = 0
			elif (argVal in identity_names):
				hashType = "identity"
				hashSeed = 0
			else:
				if ("." in argVal):
					(hashType,hashSeed) = argVal.split(".",1)
				else:
					hashType = "minimap2"
					hashSeed = argVal
				if (hashType not in minimap2_hash_names + broccohash_names + identity_names):
					usage("unrecognized hash type: \"%s\"" % hashType)
				try:
					if (hashSeed.startswith("0x")):
						hashSeed = int(hashSeed[2:],16)
					else:
						hashSeed = int(hashSeed)
				except ValueError:
					usage("hash seed has to be an integer, not \"%s\"" % hashSeed)
		elif (arg.startswith("--head=")):
			headLimit = int_with_unit(argVal)
		elif (arg.startswith("--progress=")):
			reportProgress = int_with_unit(argVal)
		elif (arg == "--debug"):
			debug += ["debug"]
		elif (arg.startswith("--debug=")):
			debug += argVal.split(",")
		elif (arg.startswith("--")):
			usage("unrecognized option: %s" % arg)
		elif (fastaName == None):
			fastaName = arg
		else:
			usage("unrecognized option: %s" % arg)

	# set up the hash function

	hashFunc = set_up_hash_function(hashType,hashSeed,kmerSize)

	# open the fasta file, if we have one

	if (fastaName == None):
		fastaF = stdin
	elif (fastaName.endswith(".gz")) or (fastaName.endswith(".gzip")):
		fastaF = gzip_open(fastaName,"rt")
	else:
		fastaF = open(fastaName,"rt")

	# process the sequences

	seqNumber = 0
	for (name,seq) in fasta_sequences(fastaF):
		seqNumber += 1
		if (headLimit != None) and (seqNumber > headLimit):
			print("limit of %d sequences reached" % headLimit,file=stderr)
			break
		if (reportProgress != None) \
		    and ((seqNumber == 1) or (seqNumber % reportProgress == 0)):
			print("processing sequence #%d: %s" % (seqNumber,name),file=stderr)

		seq = seq.upper()
		if (len(seq) < kmerSize):
			print("WARNING: \"%s\" is shorter than the kmer size" % name,file=stderr)
			continue

		nonACGT = sum([1 for nuc in seq if (nuc not in "ACGT")])
		if (nonACGT > 0):
			print("WARNING: \"%s\" contains non-ACGT; kmerization will use a special hash value for these" % name,file=stderr)

		if ("hashes" in debug):
			for (ix,h) in enumerate(kmer_hashes(seq,kmerSize,hashFunc)):
				print("%s h[%d] %016X" % (name,ix,h),file=stderr)
			if (canonical):
				for (ix,h) in enumerate(kmer_hashes(seq,kmerSize,hashFunc,reverse=True)):
					print("%s hRC[%d] %016X" % (name,ix,h),file=stderr)

		for (miniH,ix) in sequence_minimisers(seq,kmerSize,windowSize,hashFunc,canonical=canonical):
			print("%s\t%d\t%016X" % (name,ix,miniH))

	if (fastaF != stdin):
		fastaF.close()


# int_with_unit--
#	Parse a string as an integer, allowing unit suffixes

def int_with_unit(s):
	if (s.endswith("K")):
		multiplier = 1000
		s = s[:-1]
	elif (s.endswith("M")):
		multiplier = 1000 * 1000
		s = s[:-1]
	elif (s.endswith("G")):
		multiplier = 1000 * 1000 * 1000
		s = s[:-1]
	else:
		multiplier = 1

	try:               return          int(s)   * multiplier
	except ValueError: return int(ceil(float(s) * multiplier))


if __name__ == "__main__": main()

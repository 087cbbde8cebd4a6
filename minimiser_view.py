#!/usr/bin/env python3
"""
Minimisers of a stream of totally-ordered values, by robust winnowing.

A minimiser is the smallest value in a window of windowSize consecutive
values. For the hash values [28,100,9,23,4,1,72,37,8] and windowSize=4 the
minimisers are [9,4,1].

Minimisers can also be computed over two synchronized sequences, in which case
each window position contributes the smaller of the two values at that
position. For [28,100,9,23,4,1,72,37,8] and [30,2,11,101,199,73,34,900,8]
with windowSize=4 the minimisers are [2,1]. The typical use is forward and
reverse-complement kmer hashes of the same sequence.

Robust winnowing: if several values in a window tie for the minimum, the
rightmost (most recently added) one is chosen, and when the window shifts the
minimiser only changes if a strictly smaller value arrives. See
  Chirag Jain, et al. "Weighted minimizer sampling improves long read mapping."
  https://www.biorxiv.org/content/10.1101/2020.02.11.943241v1

The same minimiser value is never reported twice in a row.

Usage:
  view = make_minimiser_stream(hashes,windowSize)
  for v in view: ...
or, stepping a cursor by hand,
  cursor = view.cursor()
  while (not cursor.is_exhausted()):
      v = cursor.current_value()
      cursor.advance_to_next_distinct_minimiser()
"""

from collections import deque


class ConfigurationError(ValueError):
	pass

class PreconditionViolation(AssertionError):
	pass


# make_minimiser_stream--
#	Create a minimiser view, either as
#	  make_minimiser_stream(primarySeq,windowSize)
#	or
#	  make_minimiser_stream(primarySeq,secondarySeq,windowSize)

def make_minimiser_stream(primarySeq,*args,window_size=None):
	args = list(args)
	if (window_size != None):
		args += [window_size]

	if (len(args) == 1):
		windowSize = args[0]
		if (windowSize == 1):
			# a window of one would just pass the input through unchanged
			raise ConfigurationError("window size 1 is not valid for a single sequence;"
			                       + " choose a value greater than 1 or use two sequences")
		return MinimiserView(primarySeq,windowSize)
	elif (len(args) == 2):
		(secondarySeq,windowSize) = args
		return MinimiserView(primarySeq,windowSize,secondarySeq=secondarySeq)
	else:
		raise TypeError("make_minimiser_stream() takes (primary,windowSize) or (primary,secondary,windowSize)")


# MinimiserView--
#	The configuration of a minimiser stream. Iterating over it creates a new,
#	independent MinimiserCursor.

class MinimiserView(object):

	def __init__(self,primarySeq,windowSize,secondarySeq=None):
		if (not isinstance(windowSize,int)) or (windowSize < 1):
			raise ConfigurationError("window size has to be a positive integer, not %s" % (windowSize,))

		if (secondarySeq is not None):
			primaryLen   = sized_length(primarySeq)
			secondaryLen = sized_length(secondarySeq)
			if (primaryLen != None) and (secondaryLen != None) \
			   and (primaryLen != secondaryLen):
				raise ConfigurationError("the two sequences do not have the same length (%d vs %d)"
				                       % (primaryLen,secondaryLen))

		self.primarySeq   = primarySeq
		self.secondarySeq = secondarySeq
		self.windowSize   = windowSize

	def cursor(self):
		return MinimiserCursor(self.primarySeq,self.windowSize,self.secondarySeq)

	def __iter__(self):
		return self.cursor()

	def __repr__(self):
		return "MinimiserView(windowSize=%d,twoSequences=%s)" \
		     % (self.windowSize,self.secondarySeq is not None)


# MinimiserCursor--
#	One traversal of a minimiser view. The cursor is positioned on a minimiser
#	as soon as it is constructed (unless the input is empty).
#
#	windowValues holds the (combined) values of the current window, oldest at
#	the front, newest at the back. minimiserOffset is the position of the
#	minimiser in windowValues.

class MinimiserCursor(object):

	def __init__(self,primarySeq,windowSize,secondarySeq=None):
		self.inputs          = _PairedInputs(primarySeq,secondarySeq)
		self.windowValues    = deque()
		self.minimiserValue  = None
		self.minimiserOffset = 0
		self.window_first(windowSize)

	# window_first--
	#	Fill the first window and find its minimiser. If the input is shorter
	#	than the window, the window shrinks to the length of the input.

	def window_first(self,windowSize):
		inputs = self.inputs
		if (inputs.at_end()):
			return

		while (True):
			self.windowValues.append(inputs.current_combined_value())
			if (len(self.windowValues) == windowSize) or (not inputs.has_next()):
				break
			inputs.advance()

		(self.minimiserValue,self.minimiserOffset) = rightmost_minimum(self.windowValues)

	# next_minimiser--
	#	Shift the window by one. Returns True if a new minimiser was found or
	#	the input is exhausted, False if the minimiser didn't change.

	def next_minimiser(self):
		inputs = self.inputs
		inputs.advance()
		if (inputs.at_end()):
			return True

		newValue = inputs.current_combined_value()
		self.windowValues.popleft()
		self.windowValues.append(newValue)

		# the old minimiser has left the window; find the new one the hard way

		if (self.minimiserOffset == 0):
			oldValue = self.minimiserValue
			(self.minimiserValue,self.minimiserOffset) = rightmost_minimum(self.windowValues)
			return (self.minimiserValue != oldValue)

		if (newValue < self.minimiserValue):
			self.minimiserValue  = newValue
			self.minimiserOffset = len(self.windowValues) - 1
			return True

		self.minimiserOffset -= 1
		return False

	def advance_to_next_distinct_minimiser(self):
		if (self.is_exhausted()):
			return
		while (not self.next_minimiser()):
			pass

	def current_value(self):
		if (self.is_exhausted()):
			raise PreconditionViolation("attempt to read the value of an exhausted minimiser cursor")
		return self.minimiserValue

	def is_exhausted(self):
		return self.inputs.at_end()

	# base--
	#	Position (in the primary sequence) of the newest value in the window

	def base(self):
		return self.inputs.primary.position

	def offset(self):
		return self.minimiserOffset

	# position--
	#	Position (in the primary sequence) of the current minimiser

	def position(self):
		if (self.is_exhausted()):
			raise PreconditionViolation("attempt to read the position of an exhausted minimiser cursor")
		return self.base() - (len(self.windowValues)-1) + self.minimiserOffset

	def __eq__(self,other):
		if (not isinstance(other,MinimiserCursor)):
			return NotImplemented
		return (self.inputs.primary.position == other.inputs.primary.position) \
		   and (len(self.windowValues) == len(other.windowValues))

	def __iter__(self):
		return self

	def __next__(self):
		if (self.is_exhausted()):
			raise StopIteration
		v = self.minimiserValue
		self.advance_to_next_distinct_minimiser()
		return v


# _PairedInputs--
#	The primary sequence and (optionally) a secondary sequence, stepped in
#	lockstep. Each position contributes a single combined value to the window.

class _PairedInputs(object):

	def __init__(self,primarySeq,secondarySeq=None):
		self.primary   = _SequenceCursor(primarySeq)
		self.secondary = None if (secondarySeq is None) else _SequenceCursor(secondarySeq)
		self.check_lengths()

	def current_combined_value(self):
		v = self.primary.value
		if (self.secondary == None):
			return v
		return min(v,self.secondary.value)

	# advance--
	#	Move both cursors to the next position; the caller has to check
	#	at_end() before reading any value

	def advance(self):
		self.primary.advance()
		if (self.secondary != None):
			self.secondary.advance()
			self.check_lengths()

	def at_end(self):
		return self.primary.at_end()

	def has_next(self):
		return self.primary.has_next()

	def check_lengths(self):
		# unsized sequences can only be checked as we walk along them
		if (self.secondary != None) \
		   and (self.primary.at_end() != self.secondary.at_end()):
			raise ConfigurationError("the two sequences do not have the same length")


# _SequenceCursor--
#	A forward-only position in an iterable, with one value of look-ahead

_endOfSequence = object()

class _SequenceCursor(object):

	def __init__(self,seq):
		self.iterator  = iter(seq)
		self.lookahead = None
		self.peeked    = False
		self.position  = 0
		self.value     = next(self.iterator,_endOfSequence)

	def advance(self):
		if (self.at_end()):
			return
		if (self.peeked):
			(self.value,self.lookahead,self.peeked) = (self.lookahead,None,False)
		else:
			self.value = next(self.iterator,_endOfSequence)
		self.position += 1

	def has_next(self):
		if (self.at_end()):
			return False
		if (not self.peeked):
			self.lookahead = next(self.iterator,_endOfSequence)
			self.peeked    = True
		return (self.lookahead is not _endOfSequence)

	def at_end(self):
		return (self.value is _endOfSequence)


# rightmost_minimum--
#	Scan values left to right, keeping the last one that is less than or
#	equal to the best so far. Returns (value,offset).
#
# note: this is O(len(values)); it is only needed when the minimiser falls
#       out of the window

def rightmost_minimum(values):
	(minValue,minOffset) = (None,None)
	for (ix,v) in enumerate(values):
		if (minOffset == None) or (v <= minValue):
			(minValue,minOffset) = (v,ix)
	return (minValue,minOffset)


# minimisers_with_positions--
#	Yields a sequence of (v,ix) pairs; v is a minimiser value, ix is its
#	location in the primary sequence.

def minimisers_with_positions(view):
	cursor = view.cursor()
	while (not cursor.is_exhausted()):
		yield (cursor.current_value(),cursor.position())
		cursor.advance_to_next_distinct_minimiser()


# sized_length--
#	Length of a sequence, or None if it doesn't know its length

def sized_length(seq):
	try:              return len(seq)
	except TypeError: return None

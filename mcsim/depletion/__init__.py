"""Bateman depletion stepping over a decay chain."""
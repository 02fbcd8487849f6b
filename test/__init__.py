""" Test package for the underbar library. """

"""
authroot_parser — Certificate Transparency logs from Microsoft's authroot.stl.

Downloads authrootstl.cab from Microsoft's CDN, unpacks authroot.stl, and
decodes its PKCS#7-wrapped Certificate Trust List down to the CT-log
extension: the public keys of the CT logs Microsoft recognizes.

Built on the Railway-Oriented Programming (ROP) framework for
explicit, composable, functional error handling.
"""

__version__ = "0.1.0"

ABSTRACT = "ABSTRACT"
"""
This keyword is used for Documents (__collection_name__) to indicate a base class
that is not bound to a collection and does not need to be registered.
"""

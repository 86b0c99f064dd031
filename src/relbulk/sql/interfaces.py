# -*- coding: utf-8 -*-
"""
Interfaces, mostly internal, for the sql module.

"""

# pylint:disable=inherit-non-class,no-method-argument,no-self-argument

from zope.interface import Attribute
from zope.interface import Interface


class IDBDialect(Interface):
    """
    Handles the database-specific parts of the SQL we produce.
    """

    paramstyle = Attribute("The DB-API paramstyle of placeholders, "
                           "``'named'`` or ``'pyformat'``.")

    def compiler(root):
        """
        Return a compiler that will compile the node *root*.
        """

    def placeholder(key):
        """
        Return the text of a placeholder for the bind named *key*.
        """


class IBindParam(Interface):
    """
    A named parameter to a query, with its value.
    """

    key = Attribute("The name of the parameter.")
    value = Attribute("The value bound to the parameter.")

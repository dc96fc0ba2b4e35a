"""Arbitrary precision arithmetic on decimal strings.

Operands may be strings, ints, floats or Decimals; floats go through str() so
0.1 stays 0.1. Results are plain decimal strings. When a scale is given the
result is truncated (not rounded) to that many fraction digits, as bcmath does.

Every operation runs in a local decimal context wide enough for all the digits
of its operands plus the scale, so long operands are never rounded.

Examples:
    >>> BC.add(["0.1", "0.2"])
    '0.3'
    >>> BC.div(["10", "3"], scale=4)
    '3.3333'
    >>> BC.cmp("1.001", "1.0")
    1
"""

import operator
from decimal import Decimal, InvalidOperation, ROUND_DOWN, DivisionByZero, localcontext
from typing import Any, Callable, Iterable, Optional, Sequence

from .errors import InvalidArgumentError

# fraction digits kept by an unscaled division that does not terminate
DIVISION_DIGITS = 28


class BC:

    @staticmethod
    def _decimal(value:Any)->Decimal:
        try:
            number=Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidArgumentError(f"{value!r} is not a decimal number") from None
        if not number.is_finite():
            raise InvalidArgumentError(f"{value!r} is not a finite decimal number")
        return number

    @staticmethod
    def _precision_for(values:Iterable[Decimal], scale:Optional[int])->int:
        digits=0
        for value in values:
            sign,coefficient,exponent=value.as_tuple()
            digits+=len(coefficient)+abs(exponent)
        return digits+max(scale or 0,0)+DIVISION_DIGITS

    @staticmethod
    def _truncate(value:Decimal, scale:Optional[int])->Decimal:
        # must run inside the operation's local context
        if scale is None:
            return value
        return value.quantize(Decimal(1).scaleb(-scale),rounding=ROUND_DOWN)

    @classmethod
    def _fold(cls, op:Callable[[Decimal,Decimal],Decimal], nums:Sequence[Any], scale:Optional[int])->str:
        if len(nums)==0:
            return "0"
        values=[cls._decimal(num) for num in nums]
        with localcontext() as ctx:
            ctx.prec=cls._precision_for(values,scale)
            ctx.rounding=ROUND_DOWN
            total=values[0]
            for value in values[1:]:
                total=op(total,value)
            return format(cls._truncate(total,scale),'f')

    @classmethod
    def add(cls, nums:Sequence[Any], scale:Optional[int]=None)->str:
        return cls._fold(operator.add,nums,scale)

    @classmethod
    def sub(cls, nums:Sequence[Any], scale:Optional[int]=None)->str:
        """nums[0] - nums[1] - ..."""
        return cls._fold(operator.sub,nums,scale)

    @classmethod
    def mul(cls, nums:Sequence[Any], scale:Optional[int]=None)->str:
        return cls._fold(operator.mul,nums,scale)

    @classmethod
    def div(cls, nums:Sequence[Any], scale:Optional[int]=None)->str:
        """nums[0] / nums[1] / ..., zero divisors are skipped."""
        if len(nums)==0:
            return "0"
        divisors=[num for num in nums[1:] if cls._decimal(num)!=0]
        return cls._fold(operator.truediv,[nums[0]]+divisors,scale)

    @classmethod
    def mod(cls, left:Any, modulus:Any, scale:Optional[int]=None)->str:
        """Remainder of left / modulus, carrying the sign of left."""
        try:
            return cls._fold(operator.mod,[left,modulus],scale)
        except (DivisionByZero,InvalidOperation):
            raise InvalidArgumentError(f"Cannot take {left!r} modulo {modulus!r}") from None

    @staticmethod
    def precision(number:Any)->str:
        """Fraction digits of a number as written : "3.1400" -> "1400", "3" -> "" """
        parts=str(number).split('.')
        return parts[1] if len(parts)>1 else ''

    @classmethod
    def cmp(cls, left:Any, right:Any, scale:Optional[int]=None)->int:
        """
        Compare two numbers truncated to scale fraction digits.

        Without a scale, the longest fraction of both operands is used.

        Returns:
            -1 if left < right, 0 if equal, 1 if left > right
        """
        if scale is None:
            scale=max(len(cls.precision(left)),len(cls.precision(right)))
        values=[cls._decimal(left),cls._decimal(right)]
        with localcontext() as ctx:
            ctx.prec=cls._precision_for(values,scale)
            a,b=(cls._truncate(value,scale) for value in values)
        return (a>b)-(a<b)

    @classmethod
    def equal(cls, left:Any, right:Any, scale:Optional[int]=None)->bool:
        return cls.cmp(left,right,scale)==0

    @classmethod
    def less(cls, left:Any, right:Any, scale:Optional[int]=None)->bool:
        return cls.cmp(left,right,scale)==-1

    @classmethod
    def greater(cls, left:Any, right:Any, scale:Optional[int]=None)->bool:
        return cls.cmp(left,right,scale)==1

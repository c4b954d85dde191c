"""Synthetic minified player script fragments shared by the tests."""

CONTAINER = (
    'var Xy={Dz:function(a,b){var c=a[0];a[0]=a[b%a.length];a[b%a.length]=c},'
    'Rv:function(a){a.reverse()},'
    'Tk:function(a,b){a.splice(0,b)}};'
)

DECIPHER_FUNCTION = 'Qz=function(a){a=a.split("");Xy.Dz(a,1);Xy.Rv(a,79);Xy.Tk(a,2);return a.join("")};'

PREAMBLE = 'var _yt_player={};(function(g){var window=this;'

TIMESTAMP = 'g.Jt=function(){return{sts:19000,type:"web"}};'

PLAYER_SCRIPT = PREAMBLE + TIMESTAMP + CONTAINER + 'g.foo=function(b){return b.bar};' + DECIPHER_FUNCTION + '})(_yt_player);'
